#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Error formatting utilities for improved UX when displaying errors.
Provides context-rich, user-friendly error messages and suggestions.
"""

import sys
import textwrap
from typing import Any, Dict, List, Optional, TextIO

from csv2geojson.errors import (
    Csv2GeoJsonError, ConfigurationError, CoordinateParseError,
    CSVParseError, FileOperationError, SerializationError
)


class ErrorFormatter:
    """Format errors into user-friendly messages with context and suggestions."""

    # ANSI color codes for terminal output
    COLORS = {
        'reset': '\033[0m',
        'red': '\033[31m',
        'green': '\033[32m',
        'cyan': '\033[36m',
        'bold': '\033[1m',
    }

    TITLES = [
        (CoordinateParseError, "Coordinate Parse Error"),
        (CSVParseError, "CSV Parse Error"),
        (FileOperationError, "File Operation Error"),
        (SerializationError, "Serialization Error"),
        (ConfigurationError, "Configuration Error"),
    ]

    def __init__(self, use_colors: bool = True, terminal_width: int = 80):
        """
        Initialize the error formatter.

        Args:
            use_colors: Whether to use ANSI colors in output
            terminal_width: Terminal width for text wrapping
        """
        self.use_colors = use_colors
        self.terminal_width = terminal_width

    def format(self, error: Any) -> str:
        """
        Format an error into a user-friendly message.

        Args:
            error: Error object or exception

        Returns:
            Formatted error message with context and suggestions
        """
        if isinstance(error, Csv2GeoJsonError):
            return self._format_package_error(error)
        elif isinstance(error, Exception):
            return self._format_exception(error)
        else:
            return self._format_parts("Unknown Error", str(error), {}, [
                "This is an unexpected error of unknown type",
                "Consider reporting this as a bug"
            ])

    def _apply_color(self, text: str, color: str) -> str:
        """Apply ANSI color if colors are enabled."""
        if not self.use_colors:
            return text
        color_code = self.COLORS.get(color, '')
        if not color_code:
            return text
        return f"{color_code}{text}{self.COLORS['reset']}"

    def _wrap_text(self, text: str, indent: int = 0) -> str:
        """Wrap text to terminal width with optional indentation."""
        return textwrap.fill(
            text,
            width=self.terminal_width - indent,
            initial_indent=' ' * indent,
            subsequent_indent=' ' * indent
        )

    def _format_header(self, error_type: str) -> str:
        return self._apply_color(f"ERROR: {error_type}", 'bold')

    def _format_message(self, message: str) -> str:
        return self._apply_color(self._wrap_text(message, indent=2), 'red')

    def _format_context(self, context_items: Dict[str, Any]) -> str:
        """Format error context information."""
        items = {key: value for key, value in context_items.items() if value is not None}
        if not items:
            return ""

        lines = [self._apply_color("Context:", 'bold')]
        for key, value in items.items():
            key_str = self._apply_color(f"{key}:", 'cyan')
            lines.append(f"  {key_str} {value}")

        return "\n".join(lines)

    def _format_suggestions(self, suggestions: List[str]) -> str:
        """Format error fix suggestions."""
        if not suggestions:
            return ""

        lines = [self._apply_color("Suggestions:", 'bold')]
        for i, suggestion in enumerate(suggestions, 1):
            bullet = self._apply_color(f"{i}.", 'green')
            suggestion_text = self._wrap_text(suggestion, indent=5)
            lines.append(f"  {bullet} {suggestion_text[5:]}")

        return "\n".join(lines)

    def _format_parts(self, error_type: str, message: str,
                      context: Dict[str, Any], suggestions: List[str]) -> str:
        parts = [
            self._format_header(error_type),
            self._format_message(message),
            self._format_context(context),
            self._format_suggestions(suggestions)
        ]
        return "\n\n".join(filter(bool, parts))

    def _title_for(self, error: Csv2GeoJsonError) -> str:
        for error_class, title in self.TITLES:
            if isinstance(error, error_class):
                return title
        return error.__class__.__name__.replace("Error", " Error")

    def _format_package_error(self, error: Csv2GeoJsonError) -> str:
        """Format csv2geojson errors with file/row context and suggestions."""
        context = {
            "File": getattr(error, "file_path", None),
            "Row": getattr(error, "row_number", None),
        }
        if isinstance(error, CoordinateParseError):
            context["Field"] = error.field
            context["Value"] = repr(error.value)

        return self._format_parts(self._title_for(error), error.message, context, error.get_suggestions())

    def _format_exception(self, error: Exception) -> str:
        """Format standard Python exceptions."""
        return self._format_parts(f"Python {error.__class__.__name__}", str(error), {}, [
            "This is an unexpected error in the application",
            "Try running with --log-level debug for more detailed information",
            "Consider reporting this as a bug"
        ])


def format_error(error: Any, use_colors: bool = True) -> str:
    """
    Format an error for user-friendly display.

    Args:
        error: Error object or exception
        use_colors: Whether to use colors in the output

    Returns:
        Formatted error message
    """
    return ErrorFormatter(use_colors=use_colors).format(error)


def print_error(error: Any, stream: Optional[TextIO] = None) -> None:
    """
    Print a formatted error message, in color when the stream is a terminal.

    Args:
        error: Error object or exception
        stream: Output stream (defaults to stderr)
    """
    stream = stream or sys.stderr
    print(format_error(error, use_colors=stream.isatty()), file=stream)


def get_error_summary(error: Any) -> Dict[str, Any]:
    """
    Get a structured summary of an error for logging.

    Args:
        error: Error object or exception

    Returns:
        Dictionary with error information
    """
    summary: Dict[str, Any] = {
        "type": type(error).__name__,
        "message": str(error),
    }

    if isinstance(error, (CSVParseError, FileOperationError)):
        if error.file_path:
            summary["file"] = error.file_path
    if isinstance(error, CSVParseError) and error.row_number is not None:
        summary["row"] = error.row_number
    if isinstance(error, CoordinateParseError):
        summary["field"] = error.field
        summary["value"] = error.value

    return summary
