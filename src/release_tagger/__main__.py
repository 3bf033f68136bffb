from release_tagger.cli import app

app()
