# ==============================================================================
# RSF EXTRACTION MANIFEST
# ==============================================================================
# JSON sidecar written next to extracted files so an archive can be rebuilt
# with the same header fields and entry order.
#
# Layout of _rsf_manifest.json:
#   {
#     "header": {
#       "license": "...", "name": "...", "version": "...",
#       "timestamp": "...", "unidentified": [8, 26, 6, 6756, 41579]
#     },
#     "directories": [
#       {"name": "TXT", "folder": "TXT",
#        "files": [{"name": "HELP.TXT", "type": 4096, "text_tag": 14}]}
#     ]
#   }
#
# "folder" is the on-disk directory name (the 3-character tag); "name" is
# the full 4-byte tag as stored in the archive.
# ==============================================================================

import json
import os
from typing import Any, Dict, Optional

from ..parsers.rsf_layout import RSFHeader, TYPE_TEXT
from ..parsers.txt_codec import read_text_header


MANIFEST_NAME = "_rsf_manifest.json"


def build_manifest(archive) -> Dict[str, Any]:
    """
    Describe an open RSFArchive.

    Args:
        archive: rsf_extractor.RSFArchive

    Returns:
        JSON-serializable manifest dictionary
    """
    header = archive.header
    directories = []

    for directory in archive.directories:
        files = []
        for entry in archive.files[directory.start:directory.end]:
            record = {"name": entry.name, "type": entry.type_tag}
            if entry.type_tag == TYPE_TEXT:
                record["text_tag"] = read_text_header(archive.payload(entry)).format_tag
            files.append(record)
        directories.append({
            "name": directory.name,
            "folder": directory.tag,
            "files": files,
        })

    return {
        "header": {
            "license": header.license,
            "name": header.name,
            "version": header.version,
            "timestamp": header.timestamp,
            "unidentified": list(header.unidentified),
        },
        "directories": directories,
    }


def write_manifest(output_dir: str, manifest: Dict[str, Any]) -> str:
    """Write the manifest into output_dir and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, MANIFEST_NAME)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(manifest, f, indent=4)
    print(f"[INFO] Wrote manifest: {path}")
    return path


def load_manifest(source_dir: str) -> Optional[Dict[str, Any]]:
    """
    Load the manifest from a source directory.

    Returns:
        The manifest dictionary, or None if the directory has none
    """
    path = os.path.join(source_dir, MANIFEST_NAME)
    if not os.path.isfile(path):
        return None
    with open(path, 'r', encoding='utf-8') as f:
        manifest = json.load(f)
    print(f"[INFO] Loaded manifest from {path}")
    return manifest


def header_from_manifest(manifest: Dict[str, Any]) -> RSFHeader:
    """Header template (counts and size are filled in by the editor)."""
    fields = manifest.get("header", {})
    header = RSFHeader(
        license=fields.get("license", ""),
        name=fields.get("name", ""),
        version=fields.get("version", ""),
        timestamp=fields.get("timestamp", ""),
    )
    if "unidentified" in fields:
        header.unidentified = tuple(fields["unidentified"])
    return header
