from magneto.cli import app

app()
