import sys
from pathlib import Path

# Go up to the parent directory (..), then down into "scripts"
# This adds "../scripts" to the python search path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "scripts"))

# Now run_scenarios is directly visible to Python
from run_scenarios import main

## THIS SCRIPT COMPARES THE SCENARIOS BELOW AND SAVES THE CHART TO DATA/FIGURES

scenarios = ["baseline", "no_vaccination", "scale_up"]
years = 10

##############################################################################################

main(scenarios + ["--n-steps", str(years), "--plot", "data/figures/comparison.png"])
