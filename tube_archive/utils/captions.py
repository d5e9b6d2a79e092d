"""
Caption file helpers.

YouTube and yt-dlp produce WebVTT; hand-made captions are often SubRip.
The archive stores only WebVTT, so SRT input is converted on import.
"""

import re

from tube_archive.core.exceptions import UserError


_COMPOUND_EXT_PATTERN = re.compile(r"((?:\.[A-Za-z0-9-]+)+)$")


def convert_srt_to_vtt(source: str) -> str:
    """
    Convert SubRip text to WebVTT.
    
    Each SRT cue is an index line, a timestamp line, one or more text lines
    and a blank line. The index is dropped and the timestamp's fractional
    separator becomes "." as WebVTT requires.
    """
    result = ["WEBVTT", ""]
    lines = source.replace("\r\n", "\n").split("\n")
    
    i = 0
    while i < len(lines):
        if not lines[i].strip():
            i += 1
            continue
        
        # Cue index
        i += 1
        if i >= len(lines):
            break
        
        result.append(lines[i].replace(",", "."))
        i += 1
        
        while i < len(lines) and lines[i].strip():
            result.append(lines[i])
            i += 1
        
        result.append("")
        i += 1
    
    return "\n".join(result)


def get_captions_ext(file_name: str) -> str:
    """
    Return the compound extension of a caption file, e.g. ".en.vtt".
    
    Raises:
        UserError: If the name has no extension.
    """
    match = _COMPOUND_EXT_PATTERN.search(file_name)
    if match is None:
        raise UserError(f"Failed to parse extension from captions file \"{file_name}\"")
    return match.group(1)


def get_captions_language(file_name: str) -> str | None:
    """
    Language code from a caption file name such as "talk.en-US.srt".
    
    Returns:
        The code, or None when the name has only a single extension.
    """
    ext = get_captions_ext(file_name)
    parts = ext.split(".")[1:]
    if len(parts) < 2:
        return None
    return parts[-2] or None
