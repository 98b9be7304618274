class FontseekError(Exception):
    """Base exception for fontseek."""
    pass


class EngineError(FontseekError):
    """A render-engine call failed (detached node, closed page, script error)."""
    pass


class ConfigError(FontseekError):
    """Raised when a configuration file cannot be used."""
    pass


class BrowserError(FontseekError):
    """Raised when the browser or page cannot be started."""
    pass
