"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""

THOUSANDS_SEPARATOR = ","


class ConvertUtils:
    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Convert human-readable size string to bytes.
        Supports formats: '1.5GB', '2048KB', '1000', '1K', '1M', '1G', etc.
        Raises ValueError for negative sizes or invalid formats.
        """
        size_str = size_str.strip().upper()

        units = {
            'PB': 1024 ** 5, 'P': 1024 ** 5,
            'TB': 1024 ** 4, 'T': 1024 ** 4,
            'GB': 1024 ** 3, 'G': 1024 ** 3,
            'MB': 1024 ** 2, 'M': 1024 ** 2,
            'KB': 1024, 'K': 1024,
            'B': 1,
        }

        # Longest suffix first so 'KB' is not read as 'K' + 'B'
        for unit in sorted(units.keys(), key=len, reverse=True):
            if size_str.endswith(unit):
                value_str = size_str[:-len(unit)].strip()
                try:
                    value = float(value_str)
                except ValueError:
                    raise ValueError(f"Invalid numeric value in size: '{value_str}'")

                if value < 0:
                    raise ValueError(f"Negative size not allowed: '{size_str}'")
                return int(value * units[unit])

        try:
            value = int(size_str)
        except ValueError:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 1.5GB, 2048KB, 1000, 1K, 1M, etc."
            )

        if value < 0:
            raise ValueError(f"Negative size not allowed: '{size_str}'")
        return value

    @staticmethod
    def with_thousands_separator(value: int, separator: str = THOUSANDS_SEPARATOR) -> str:
        """
        Insert a separator every three digits: 1234567 -> '1,234,567'.
        """
        return f"{value:,}".replace(",", separator)

    @staticmethod
    def bytes_with_separator(size_bytes: int) -> str:
        """Render a byte count the way the text report shows it: '1,024 bytes'."""
        return f"{ConvertUtils.with_thousands_separator(size_bytes)} bytes"

    @staticmethod
    def display_path(path: str) -> str:
        """
        Printable form of a path.
        Undecodable bytes that os.scandir kept as lone surrogates are shown as '\\xff' escapes.
        """
        return path.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")
