from aeon_scanner.main import run

run()
