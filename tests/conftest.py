import os

# Execução sem display (CI): plataforma Qt offscreen
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
