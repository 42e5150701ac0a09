from gpush.cli.main import run

run()
