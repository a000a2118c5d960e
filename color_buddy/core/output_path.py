"""Derive where each output file goes."""

from pathlib import Path

from color_buddy.core.types import OutputType


def _palette_file_name(original: Path, output_type: OutputType) -> str:
    if output_type.is_json:
        ext = 'json'
    else:
        ext = original.suffix.lstrip('.') or 'png'
    return f'{original.stem}_palette.{ext}'


def output_file_name(original: str | Path, output: str | Path | None, output_type: OutputType) -> Path:
    """Return the output path for one source image.

    An explicit file path is used as given. A directory receives
    <stem>_palette.<ext>; with no output the file lands beside the source.
    """
    original = Path(original)
    if output is None:
        return original.with_name(_palette_file_name(original, output_type))
    output = Path(output)
    if output.is_dir():
        return output / _palette_file_name(original, output_type)
    return output
