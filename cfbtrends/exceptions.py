"""
Custom exceptions for the trend engine.

The core treats missing data as a normal condition (skip the market,
emit a pending pick, exclude the row from scoped slices). Exceptions are
reserved for contract violations and unreadable inputs at the boundary.

Usage:
    from cfbtrends.exceptions import OrientationError, DataLoadError

    try:
        pairs = reconcile_orientation(ensemble, "Alabama", "Georgia")
    except OrientationError as e:
        print(f"Sources disagree on team names: {e}")
"""


class CFBTrendsError(Exception):
    """
    Base exception for all trend engine errors.

    All custom exceptions inherit from this, allowing:
        except CFBTrendsError:
            # Catch any system error
    """
    pass


# =============================================================================
# CONTRACT ERRORS
# =============================================================================

class OrientationError(CFBTrendsError, AssertionError):
    """
    Ensemble and market row do not describe the same two teams.

    Raised when:
    - A market row's team names differ from the ensemble's pair
    - A caller hands the grading engine sources keyed inconsistently

    This is a programming error, so it is also an AssertionError.
    """

    def __init__(self, ensemble_teams, market_teams):
        self.ensemble_teams = tuple(ensemble_teams)
        self.market_teams = tuple(market_teams)
        super().__init__(
            f"Ensemble teams {self.ensemble_teams} do not match "
            f"market teams {self.market_teams}"
        )


# =============================================================================
# DATA ERRORS
# =============================================================================

class DataLoadError(CFBTrendsError):
    """
    Error reading an input file.

    Raised when:
    - A CSV file exists but cannot be parsed
    - The data directory does not exist
    """

    def __init__(self, source: str, message: str = None, original_error: Exception = None):
        self.source = source
        self.original_error = original_error
        msg = f"Error loading {source}"
        if message:
            msg += f": {message}"
        if original_error:
            msg += f" (caused by: {type(original_error).__name__}: {original_error})"
        super().__init__(msg)


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigError(CFBTrendsError):
    """
    Invalid configuration or command-line value.

    Raised when:
    - An unknown market view is requested
    - A confidence band string cannot be parsed
    """

    def __init__(self, setting: str, message: str):
        self.setting = setting
        super().__init__(f"Configuration error ({setting}): {message}")
