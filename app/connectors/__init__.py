"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError
from app.connectors.data_gov_connector import DataGovConnector

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "DataGovConnector",
]
