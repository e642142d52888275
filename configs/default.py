"""Default configuration for the Tower of Hanoi game."""

# Puzzle settings
disk_count = 4
min_disks = 2   # bounds of the disk-count control, values outside are clamped
max_disks = 5

# Audio
muted = False
background_volume = 0.3
audio_dir = "./audio"
sound_files = {
    "background": "background.wav",
    "pickup": "pickup.wav",
    "drop": "drop.wav",
    "win": "win.wav",
}

# Paths
template_dir = "./templates/tower_of_hanoi/"

# Window
window_width = 960
window_height = 640
fps = 60

log_level = "INFO"
