from pagertally.cli.main import app

app(prog_name="pagertally")
