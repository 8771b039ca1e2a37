from watchpick.application.auth.session_holder import AuthSessionHolder, normalize_date_of_birth

__all__ = ["AuthSessionHolder", "normalize_date_of_birth"]
