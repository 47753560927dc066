from .theme import ProfileReader, ProfileStore, ProfileTheme

__all__ = ["ProfileReader", "ProfileStore", "ProfileTheme"]
