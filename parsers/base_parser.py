"""
Base parser class for data validation and transformation
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Any, Optional, List
from pydantic import BaseModel, ValidationError

from config.logging_config import get_logger

logger = get_logger(__name__)


class BaseParser(ABC):
    """Base class for data parsers with validation"""

    def __init__(self, strict_mode: bool = False):
        """
        Initialize parser

        Args:
            strict_mode: If True, validation errors are reported as critical
        """
        self.strict_mode = strict_mode
        self.errors: List[Dict[str, Any]] = []

    @abstractmethod
    def parse(self, raw_data: Dict[str, Any]) -> Optional[BaseModel]:
        """
        Parse raw data into validated model

        Args:
            raw_data: Raw record

        Returns:
            Validated model instance or None if parsing failed
        """
        pass

    def validate_required_fields(self, data: Dict[str, Any], required: List[str]) -> bool:
        """
        Validate that required fields are present

        Args:
            data: Data dictionary to validate
            required: List of required field names

        Returns:
            True if all required fields present
        """
        missing = [field for field in required
                   if data.get(field) is None or str(data.get(field)).strip() == '']

        if missing:
            error_msg = f"Missing required fields: {missing}"
            self.collect_error('validation', error_msg, 'critical' if self.strict_mode else 'warning')
            return False

        return True

    def normalize_text(self, text: Optional[str]) -> str:
        """
        Normalize text field (trim, collapse whitespace)

        Args:
            text: Raw text

        Returns:
            Normalized text
        """
        if not text:
            return ""

        return ' '.join(str(text).split())

    def normalize_integer(self, value: Any) -> Optional[int]:
        """
        Normalize value to integer

        Args:
            value: Value to convert

        Returns:
            Integer value or None
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return None

        try:
            if isinstance(value, str):
                # Handle comma-separated numbers
                value = value.replace(',', '')
            return int(float(value))
        except (ValueError, TypeError):
            self.collect_error('parse_error', f"Could not parse integer: {value}", 'warning')
            return None

    def collect_error(self, error_type: str, message: str, severity: str = 'warning') -> None:
        """
        Collect parsing error

        Args:
            error_type: Type of error (validation, parse_error, etc.)
            message: Error message
            severity: Error severity (critical, warning)
        """
        error = {
            'error_type': error_type,
            'message': message,
            'severity': severity,
            'timestamp': datetime.now()
        }
        self.errors.append(error)

        if severity == 'critical':
            logger.error(f"Critical parsing error: {message}")
        else:
            logger.warning(f"Parsing warning: {message}")

    def get_errors(self) -> List[Dict[str, Any]]:
        """Get collected errors"""
        return self.errors

    def has_critical_errors(self) -> bool:
        """Check if there are any critical errors"""
        return any(error['severity'] == 'critical' for error in self.errors)

    def validate_model(self, model_class: type, data: Dict[str, Any]) -> Optional[BaseModel]:
        """
        Validate data against Pydantic model

        Args:
            model_class: Pydantic model class
            data: Data to validate

        Returns:
            Model instance or None if validation failed
        """
        try:
            return model_class(**data)
        except ValidationError as e:
            for error in e.errors():
                field = '.'.join(str(loc) for loc in error['loc']) or model_class.__name__
                message = f"Validation error in {field}: {error['msg']}"
                severity = 'critical' if self.strict_mode else 'warning'
                self.collect_error('validation', message, severity)
            return None
