from app.gestao import create_app

app = create_app()
