class WalletConnectionError(Exception):
    """Raised when no usable wallet connection is available"""
    pass

class SwapAPIError(Exception):
    """Raised when the swap/portfolio API returns an error"""

    def __init__(self, message: str, status: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status = status
        self.body = body

class TransactionGenerationError(Exception):
    """Raised when swap instructions cannot be turned into transactions"""
    pass

class BatchSubmissionError(Exception):
    """Raised by a wallet backend when a batch cannot be submitted"""
    pass
