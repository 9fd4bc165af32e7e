from pathlib import Path
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from loguru import logger

import wallcal.settings as settings


def init_fonts(fonts_dir: Path | None = None, names: list[str] | None = None) -> list[str]:
    """
    Make the configured fonts available to ReportLab.

    The 14 standard PDF fonts (Helvetica, Times-Roman, ...) need no files.
    Any other name is loaded from "<name>.ttf" in `fonts_dir`, FONTS_DIR, or the
    package-local fonts folder, in that order. Returns the names registered.
    """
    if names is None:
        names = [settings.FONT_REGULAR, settings.FONT_BOLD]

    candidates = []
    if fonts_dir:
        candidates.append(Path(fonts_dir))
    candidates.append(Path(settings.FONTS_DIR))
    candidates.append(Path(__file__).resolve().parent / "fonts")

    registered = []
    for name in names:
        if name in pdfmetrics.standardFonts or name in pdfmetrics.getRegisteredFontNames():
            continue
        fname = f"{name}.ttf"
        for base in candidates:
            font_path = (base / fname).resolve()
            if font_path.is_file():
                logger.debug("Loading font {} from {}", name, str(font_path))
                pdfmetrics.registerFont(TTFont(name, str(font_path)))
                registered.append(name)
                break
        else:
            msg = (
                f"Font '{fname}' not found in: "
                f"{', '.join(str(p) for p in candidates)}"
            )
            logger.error("{}", msg)
            raise FileNotFoundError(msg)
    return registered
