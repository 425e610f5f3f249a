from lightsailctl.core.main import run

run()
