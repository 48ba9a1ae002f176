"""Environment configuration for the analytics service."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from .exceptions import ConfigurationError


class AnalyticsConfig(BaseModel):
    """Settings read from the Lambda environment."""

    expenses_table: str = "expense-tracker-aws-expenses"
    date_index: str = "user-date-index"
    first_weekday: int = Field(0, ge=0, le=6, description="0 = Monday (ISO), 6 = Sunday")
    log_level: str = "INFO"
    use_localstack: bool = False
    localstack_endpoint: Optional[str] = None
    recent_expenses_limit: int = Field(5, ge=1)

    @property
    def endpoint_url(self) -> Optional[str]:
        """DynamoDB endpoint override, if LocalStack is enabled."""
        if self.use_localstack and self.localstack_endpoint:
            return self.localstack_endpoint
        return None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AnalyticsConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            Parsed configuration

        Raises:
            ConfigurationError: If a variable has an invalid value
        """
        env = os.environ if environ is None else environ

        values = {
            'expenses_table': env.get('EXPENSES_TABLE'),
            'date_index': env.get('EXPENSES_DATE_INDEX'),
            'first_weekday': env.get('FIRST_WEEKDAY'),
            'log_level': env.get('LOG_LEVEL'),
            'use_localstack': env.get('USE_LOCALSTACK', 'false').lower() == 'true',
            'localstack_endpoint': env.get('LOCALSTACK_ENDPOINT'),
            'recent_expenses_limit': env.get('RECENT_EXPENSES_LIMIT'),
        }

        try:
            return cls(**{k: v for k, v in values.items() if v is not None})
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid analytics configuration: {e}")
