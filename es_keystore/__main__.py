"""Run the es-keystore command line tool."""

from .tool.es_keystore import main

if __name__ == "__main__":
    main()
