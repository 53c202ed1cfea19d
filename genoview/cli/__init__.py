"""genoview subcommands"""
