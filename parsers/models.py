"""
Pydantic models for validating configuration and reference data
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError


class DataSourceModel(BaseModel):
    """Connection parameters read from a datasource file"""
    model_config = ConfigDict(str_strip_whitespace=True)

    url: str
    username: Optional[str] = None
    password: Optional[str] = None
    echo: bool = False

    @field_validator('url')
    def validate_url(cls, v):
        if not v:
            raise ValueError('Database URL is required')
        try:
            make_url(v)
        except ArgumentError as e:
            raise ValueError(f'Invalid database URL: {e}')
        return v


class CommitteeAliasModel(BaseModel):
    """Committee alias reference row"""
    model_config = ConfigDict(str_strip_whitespace=True)

    cty_code: int
    chamber: int
    name: str
    alternate_name: str
    start_year: int = 0
    end_year: int = 9999

    @field_validator('chamber')
    def validate_chamber(cls, v):
        valid_chambers = [1, 2]
        if v not in valid_chambers:
            raise ValueError(f'Chamber must be one of {valid_chambers} (1 House, 2 Senate)')
        return v

    @field_validator('alternate_name')
    def validate_alternate_name(cls, v):
        if not v:
            raise ValueError('Alternate name is required')
        return v

    @model_validator(mode='after')
    def validate_code_and_years(self):
        if not str(self.cty_code).startswith(str(self.chamber)):
            raise ValueError(f'Committee code {self.cty_code} does not belong to chamber {self.chamber}')
        if self.end_year < self.start_year:
            raise ValueError('End year must not precede start year')
        return self
