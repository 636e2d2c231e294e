"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject mock services for testing.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is ignored.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.transactions import TransactionService
        from services.categories import CategoryService
        from services.settings import SettingsService
        from services.rules import RuleService
        from services.mappings import MappingService

        self.transactions = TransactionService(self.db_manager)
        self.categories = CategoryService(self.db_manager)
        self.settings = SettingsService(self.db_manager)
        self.rules = RuleService(self.settings)
        self.mappings = MappingService(self.settings)
