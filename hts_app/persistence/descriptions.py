"""HS code description lookup with placeholder fallback."""

from typing import Optional, Protocol

from hts_app.errors import DescriptionUnavailableError
from hts_app.logging import get_logger

DESCRIPTION_PLACEHOLDER = "Description not available"


class DescriptionSource(Protocol):
    def get_description(self, code: str) -> Optional[str]: ...


class DescriptionLookup:
    """Resolves an HS code to its description. Never raises."""

    def __init__(self, source: DescriptionSource, placeholder: str = DESCRIPTION_PLACEHOLDER):
        self.source = source
        self.placeholder = placeholder
        self.logger = get_logger("trade.descriptions")

    def lookup(self, code: str) -> str:
        """
        Return the description for `code`, or the placeholder on any failure.

        Missing rows, empty descriptions and query errors all yield the
        placeholder.
        """
        try:
            description = self.source.get_description(code)
            if not description:
                raise DescriptionUnavailableError(
                    f"No description recorded for {code}", code=code
                )
            return description

        except DescriptionUnavailableError as e:
            self.logger.info("Description not found", code=code, reason=str(e))
        except Exception as e:
            self.logger.warning("Error fetching HS code description", code=code, error=str(e))

        return self.placeholder
