"""Entry point for running the Bitbucket Server provider CLI."""

from bitbucket_provider import main

if __name__ == "__main__":
    main()
