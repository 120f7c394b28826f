"""Theme definitions and selection helpers.

Styles are SGR parameter strings (``"38;5;69;1"``) rather than full escape
sequences so a selected-row variant can be derived by appending a background.
Themes are immutable values handed to a renderer at construction time.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class PermStyles:
    """Semantic styles for permission characters and entry names."""

    dir: str
    file: str
    symlink: str
    read: str
    write: str
    exec: str
    none: str
    special: str

    def with_background(self, background: str) -> PermStyles:
        """Return a copy whose every style also carries ``background``."""
        if not background:
            return self
        changes = {
            f.name: ";".join(part for part in (getattr(self, f.name), background) if part)
            for f in fields(self)
        }
        return replace(self, **changes)


@dataclass(frozen=True)
class Theme:
    name: str
    perm: PermStyles
    selected_background: str
    header: str
    help: str

    def selected_perm(self) -> PermStyles:
        return self.perm.with_background(self.selected_background)


DEFAULT_THEME = Theme(
    name="default",
    perm=PermStyles(
        dir="38;5;69;1",
        file="38;5;252",
        symlink="38;5;81;1",
        read="38;5;214",
        write="38;5;196",
        exec="38;5;76",
        none="38;5;240",
        special="38;5;197;1",
    ),
    selected_background="48;5;238",
    header="1",
    help="2;38;5;250",
)

OCEAN_THEME = Theme(
    name="ocean",
    perm=PermStyles(
        dir="1;38;5;45",
        file="38;5;252",
        symlink="1;38;5;117",
        read="38;5;153",
        write="38;5;215",
        exec="38;5;84",
        none="2;38;5;110",
        special="1;38;5;39",
    ),
    selected_background="48;5;24",
    header="1;38;5;45",
    help="2;38;5;110",
)

PLAIN_THEME = Theme(
    name="plain",
    perm=PermStyles(
        dir="",
        file="",
        symlink="",
        read="",
        write="",
        exec="",
        none="",
        special="",
    ),
    selected_background="7",
    header="",
    help="",
)

_THEMES: dict[str, Theme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> Theme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


def next_theme_name(name: str | None) -> str:
    """Return the theme after ``name`` in cycling order."""
    names = available_theme_names()
    current = normalize_theme_name(name)
    return names[(names.index(current) + 1) % len(names)]


__all__ = [
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "PermStyles",
    "Theme",
    "available_theme_names",
    "next_theme_name",
    "normalize_theme_name",
    "resolve_theme",
]
