"""Console styles for saferm.

Every style the CLI renders has a default in the bundled data/theme.toml.
Any of them can be overridden in ~/.config/saferm/theme.toml with a Rich
style definition such as ``"bold #ff5f5f"``.
"""

import logging
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from rich.errors import StyleSyntaxError
from rich.style import Style
from rich.theme import Theme

from saferm.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

# Table holding style definitions in a theme file
STYLES_TABLE = "styles"


class ThemeStyles(BaseModel):
    """Rich style definitions, keyed by the names used in CLI markup."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    # Messages
    info: str = "#0ec1c8"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "bold #f53263"

    # Tables
    muted: str = "#b2bec3"
    border: str = "#29526d"
    bold_header: str = "bold #69B9A1"
    item_name: str = Field(default="bold", alias="item.name")

    # Time left before an item is purged
    expiring: str = "#faf870"
    purged: str = "#f53263"

    @field_validator("*")
    @classmethod
    def check_style(cls, value: str) -> str:
        """Reject definitions Rich cannot parse."""
        try:
            Style.parse(value)
        except StyleSyntaxError as e:
            msg = f"invalid style {value!r}: {e}"
            raise ValueError(msg) from None
        return value

    def to_rich_theme(self) -> Theme:
        """Build the Rich theme for the shared consoles."""
        return Theme(self.model_dump(by_alias=True))


def get_bundled_theme_path() -> Path:
    """Path of the theme file shipped with the package."""
    return Path(str(resources.files("saferm.data").joinpath("theme.toml")))


def read_styles(path: Path) -> dict[str, str]:
    """Read the style table of a theme file.

    A missing file yields no styles. Unreadable files, invalid TOML and
    a malformed table are logged and ignored.

    Args:
        path: Theme file to read.

    Returns:
        Style name to definition, for every string value in the table.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    table = data.get(STYLES_TABLE, {})
    if not isinstance(table, dict):
        logger.warning("Ignoring theme file %s: [%s] is not a table", path, STYLES_TABLE)
        return {}
    return {name: value for name, value in table.items() if isinstance(value, str)}


def load_styles(user_path: Path | None = None) -> ThemeStyles:
    """Merge the bundled styles with the user's overrides.

    Invalid overrides are discarded as a whole and the defaults are used.

    Args:
        user_path: Override file. Defaults to ~/.config/saferm/theme.toml.
    """
    bundled = read_styles(get_bundled_theme_path())
    overrides = read_styles(user_path or get_user_theme_path())
    try:
        return ThemeStyles.model_validate({**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Invalid theme overrides, using defaults: %s", e)
        return ThemeStyles()


@cache
def get_theme() -> Theme:
    """Rich theme shared by every console, loaded once per process."""
    return load_styles().to_rich_theme()
