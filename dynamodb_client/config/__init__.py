from .config import DynamoDBConfig, RetryPolicy

__all__ = ["DynamoDBConfig", "RetryPolicy"]
