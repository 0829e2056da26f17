from marketplace_api.main import run

run()
