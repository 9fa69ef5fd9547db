"""editorsyncd: HTTP bridge daemon for the code-editor side of editorsync."""

__version__ = "0.1.0"
