from app.jsonfmt import create_app

app = create_app()
