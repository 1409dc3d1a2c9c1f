"""Services package. Service classes are exposed lazily to avoid circular imports."""

def __getattr__(name):
    if name == 'ManuscriptService':
        from .manuscript_service import ManuscriptService
        return ManuscriptService
    if name == 'ModerationService':
        from .moderation_service import ModerationService
        return ModerationService
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

__all__ = ['ManuscriptService', 'ModerationService']
