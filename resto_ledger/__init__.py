"""Data-access layer for the restaurant expense ledger."""

APP_VERSION = "0.1.0"
