"""Read TwistyTimer CSV solve exports and import them into a MySQL database."""

__version__ = "0.1.0"