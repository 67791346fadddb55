"""Command line tool for es-keystore."""
