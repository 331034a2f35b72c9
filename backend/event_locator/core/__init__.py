"""Configuration, security, logging and cross-cutting helpers."""
