from .file import PropertyFile, DEFAULT_ENCODING
