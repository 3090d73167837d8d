from mangum import Mangum
from app.main import app

# Lambda entry point; each invocation is an independent request
handler = Mangum(app)
