# =========================
# TOOL SELECTION (dwell)
# =========================
DWELL_TIME = 0.5            # 500ms sobre un botón para (des)activar la herramienta

# =========================
# PINCH
# =========================
PINCH_THRESHOLD = 0.05      # distancia normalizada pulgar-índice

# =========================
# MANIPULATION
# =========================
ROTATION_SPEED = 0.01       # grados por píxel de arrastre vertical
SCALE_SPEED = 0.0001        # escala por píxel de arrastre horizontal
MIN_SCALE = 0.005
MAX_SCALE = 2.5

# =========================
# BODY CALIBRATION
# =========================
BODY_SMOOTHING = 0.2        # alpha del EMA de escala
BODY_SCALE_MIN = 0.5        # clamp del factor hombros / hombros0
BODY_SCALE_MAX = 3.0
BODY_VERTICAL_OFFSET = 100.0  # px bajo el centro del pecho

# =========================
# INITIAL TRANSFORM
# =========================
INITIAL_POSITION = (400.0, 300.0)
INITIAL_ROTATION = 0.0
INITIAL_SCALE = 1.0

# Diseño sobre la plantilla (modo DESIGN)
DESIGN_POSITION = (1000.0, 300.0)

# =========================
# LANDMARK INDICES
# =========================
THUMB_TIP = 4
INDEX_TIP = 8

NOSE = 0
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_HIP = 23
RIGHT_HIP = 24
POSE_LANDMARK_COUNT = 33
