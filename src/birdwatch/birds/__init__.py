"""Birds domain: species records and their search."""

# Import directly from submodules when needed:
#   from birdwatch.birds.models import Bird, BirdCreate, BirdRead
#   from birdwatch.birds.manager import BirdManager
