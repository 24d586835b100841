from uncommitted.cli import app

app(prog_name="uncommitted")
