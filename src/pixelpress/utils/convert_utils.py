"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""

IEC_UNIT = 1024
IEC_PREFIXES = "KMGTPE"


class ConvertUtils:
    @staticmethod
    def bytes_to_iec(size_bytes: int) -> str:
        """
        Convert bytes to a binary (IEC) human-readable string.
        Sizes below 1024 are printed as a plain byte count ("1023 B"),
        everything else with one decimal place ("1.5 KiB", "1.0 MiB").
        """
        if size_bytes < IEC_UNIT:
            return f"{size_bytes} B"

        div, exp = IEC_UNIT, 0
        n = size_bytes // IEC_UNIT
        while n >= IEC_UNIT and exp < len(IEC_PREFIXES) - 1:
            div *= IEC_UNIT
            exp += 1
            n //= IEC_UNIT
        return f"{size_bytes / div:.1f} {IEC_PREFIXES[exp]}iB"

    @staticmethod
    def savings_ratio(prior_size: int, new_size: int) -> float:
        """Fraction of the original size that was saved (negative if the file grew)."""
        if prior_size <= 0:
            return 0.0
        return 1 - (new_size / prior_size)
