from __future__ import annotations

from PIL import Image, ImageDraw

from gestureview.core.types import Size
from gestureview.transform.affine import AffineTransform


def make_test_card(size: Size = (400, 300)) -> Image.Image:
    # Asymmetric card so rotation and mirroring are visible at a glance
    w, h = size
    img = Image.new("RGBA", (w, h), (40, 44, 52, 255))
    d = ImageDraw.Draw(img)

    d.rectangle((0, 0, w - 1, h - 1), outline=(255, 255, 255, 220), width=3)
    # "up" marker in the top-left corner
    d.polygon([(12, h // 3), (w // 6, 12), (w // 3, h // 3)], fill=(230, 90, 70, 255))
    d.ellipse((w // 2 - 10, h // 2 - 10, w // 2 + 10, h // 2 + 10), fill=(255, 255, 255, 255))
    d.line((w // 2, h // 2, w - 12, h // 2), fill=(90, 200, 120, 255), width=4)
    return img


class PilImageSurface:
    """
    ImageSurface backed by a Pillow image.

    Stores the last transform it was given; render() draws the content
    through it onto a surface-sized canvas.
    """

    def __init__(self, content: Image.Image, size: Size, background=(0, 0, 0, 0)) -> None:
        self.content = content.convert("RGBA")
        self.size = (int(size[0]), int(size[1]))
        self.background = background
        self.transform = AffineTransform.identity()
        self.updates = 0

    def set_transform(self, transform: AffineTransform) -> None:
        self.transform = transform
        self.updates += 1

    def content_intrinsic_size(self) -> Size:
        return self.content.size

    def render(self) -> Image.Image:
        inv = self.transform.inverted()
        if inv is None:
            # collapsed to a line or a point: nothing visible
            return Image.new("RGBA", self.size, self.background)

        # PIL wants the output -> input mapping
        layer = self.content.transform(
            self.size,
            Image.Transform.AFFINE,
            data=inv.values(),
            resample=Image.Resampling.BILINEAR,
        )
        canvas = Image.new("RGBA", self.size, self.background)
        canvas.alpha_composite(layer)
        return canvas

    def save(self, path) -> None:
        self.render().save(path)
