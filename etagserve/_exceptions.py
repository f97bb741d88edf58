__all__ = ("EtagServeError", "ParseError", "ValidationError")


class EtagServeError(Exception): ...


class ParseError(EtagServeError): ...


class ValidationError(EtagServeError): ...
