from .session import FRAME_RATE_PRESETS, SessionAnalyzer, SessionAnalyzerConfig, SessionResult

__all__ = ["FRAME_RATE_PRESETS", "SessionAnalyzer", "SessionAnalyzerConfig", "SessionResult"]
