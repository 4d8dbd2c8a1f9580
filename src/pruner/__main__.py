from pruner.cli import app

app(prog_name="pruner")
