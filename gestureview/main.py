from __future__ import annotations

from gestureview.core.config import DEFAULT_TUNING
from gestureview.core.types import PointerPhase
from gestureview.interpreter.recognizer import GestureRecognizer
from gestureview.render.pil_surface import PilImageSurface, make_test_card


def main():
	size = (480, 480)
	surface = PilImageSurface(make_test_card((600, 400)), size)
	rec = GestureRecognizer(DEFAULT_TUNING, surface=surface)
	rec.on_size_changed(*size)
	rec.on_content_changed()

	print("GestureView synthetic swipe demo.")
	cx, cy = size[0] // 2, size[1] // 2
	t = 1000
	rec.on_pointer_event(PointerPhase.DOWN, cx + 100, cy, t, t)
	# swipe a quarter turn around the center: right of it, then below it
	for i in range(1, 21):
		x = cx + 100 - 5 * i
		y = cy + 5 * i
		rec.on_pointer_event(PointerPhase.MOVE, x, y, t + 16 * i, t)
	rec.on_pointer_event(PointerPhase.UP, cx, cy + 100, t + 340, t)

	print("state:", rec.state.value)
	print("transform:", tuple(round(v, 3) for v in rec.current_transform().values()))
	surface.save("gestureview_demo.png")
	print("done")


if __name__ == "__main__":
	main()
