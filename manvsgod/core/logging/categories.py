"""Log categories and common messages shared across the game backend."""


class LogCategory:
    """Category attached to every captured log entry (``extra={"category": ...}``)"""
    LEVEL_LOADING = "level_loading"
    CHESS_MOVE = "chess_move"
    BETTING = "betting"
    GOOGLE_SHEETS = "google_sheets"
    GOOGLE_FORMS = "google_forms"
    UI_RENDERING = "ui_rendering"
    STATE_MANAGEMENT = "state_management"
    NETWORK = "network"
    VALIDATION = "validation"
    GAME_LOGIC = "game_logic"
    RULES_ENGINE = "rules_engine"
    GENERAL = "general"


class ErrorMessages:
    LEVEL_NOT_FOUND = "Level not found"
    INVALID_MOVE = "Invalid chess move"
    INSUFFICIENT_CURRENCY = "Insufficient currency"
    NETWORK_ERROR = "Network request failed"
    VALIDATION_ERROR = "Validation failed"
    RENDER_ERROR = "Component rendering failed"
    STATE_ERROR = "State management error"
