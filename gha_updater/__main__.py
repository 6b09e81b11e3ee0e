from gha_updater.cli import cli

cli(prog_name="gha-updater")
