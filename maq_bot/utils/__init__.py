from maq_bot.utils.text_parsers import first_name, is_greeting, is_reset_command, normalize_text

__all__ = ["first_name", "is_greeting", "is_reset_command", "normalize_text"]
