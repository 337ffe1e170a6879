"""Media components: images, figures, heroes, and YouTube embeds."""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import quote

from markupsafe import Markup

from leafpress.components._validation import choice, require

HERO_FITS = frozenset({"cover", "contain"})


def _dimension(field: str, value: int | str | None) -> int | None:
    if value is None:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        msg = f"{field}={value!r} is not an integer"
        raise ValueError(msg) from None
    if number <= 0:
        msg = f"{field} must be positive, got {number}"
        raise ValueError(msg)
    return number


def _size_attrs(width: int | None, height: int | None) -> Markup:
    attrs = Markup("")
    if width is not None:
        attrs += Markup(' width="{}"').format(width)
    if height is not None:
        attrs += Markup(' height="{}"').format(height)
    return attrs


def image(
    src: str | None = None,
    alt: str | None = None,
    width: int | str | None = None,
    height: int | str | None = None,
    class_: str | None = None,
) -> Markup:
    """``<img>`` with mandatory alt text (``alt=""`` marks it decorative)."""
    require("src", src)
    if alt is None:
        msg = "missing required argument 'alt' (use alt=\"\" for decorative images)"
        raise ValueError(msg)
    css = Markup(' class="{}"').format(class_) if class_ else Markup("")
    return Markup('<img src="{}" alt="{}"{}{} loading="lazy">').format(
        src,
        alt,
        css,
        _size_attrs(_dimension("width", width), _dimension("height", height)),
    )


def figure(content: str, class_: str | None = None, *, md: Callable[[str], str]) -> Markup:
    classes = "w-figure" + (f" {class_}" if class_ else "")
    return Markup('<figure class="{}">{}</figure>').format(classes, Markup(md(content)))


def hero(
    image: str | None = None,
    alt: str = "",
    fit: str = "cover",
    position: str | None = None,
) -> Markup:
    require("image", image)
    choice("fit", fit, HERO_FITS)
    style = Markup(' style="object-position: {}"').format(position) if position else Markup("")
    return Markup(
        '<div class="w-hero w-hero--{}"><img class="w-hero__image" src="{}" alt="{}"{}></div>'
    ).format(fit, image, alt, style)


def youtube(id: str | None = None, start_time: int | str = 0) -> Markup:
    require("id", id)
    start = int(start_time)
    if start < 0:
        msg = f"start_time must be >= 0, got {start}"
        raise ValueError(msg)
    src = f"https://www.youtube.com/embed/{quote(str(id), safe='')}"
    if start:
        src += f"?start={start}"
    return Markup(
        '<div class="w-youtube"><iframe class="w-youtube__embed" src="{}" frameborder="0" '
        'allow="autoplay; encrypted-media; picture-in-picture" allowfullscreen></iframe></div>'
    ).format(src)
