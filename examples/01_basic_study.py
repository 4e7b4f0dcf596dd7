"""
Basic Power Study Example
=========================

This example runs a small power study for the reference rank-correlation
measure and shows how often it detects each structured generator as noise
increases.
"""

import contrastpower

# Research question: how quickly does the measure lose power on linear and
# periodic dependencies as noise is mixed in?

print("=" * 60)
print("BASIC POWER STUDY EXAMPLE")
print("=" * 60)

# 1. Create the study (reference measure by default)
study = contrastpower.PowerStudy()

# 2. Choose the generators and the grid
# Independent is kept: its power should stay at the nominal false-positive rate
study.set_generators(["Linear", "Sine_1", "Hypercube", "Independent"])
study.set_dimensions([2, 4], diluted=[4])
study.set_noise_levels(10)
study.set_observation_counts([100])
study.set_slice_techniques(["c"])

# 3. Monte Carlo settings
# 10000 calibration trials give stable 99th percentiles; 500 power trials per cell
study.set_simulations(power=500, calibration=10000)
study.set_seed(2137)

print(f"\nStudy setup: {study}")
print(f"Summary records to produce: {study.total_cells}")

# 4. Run, writing every record to summary.csv as soon as it is ready
print("\n" + "=" * 60)
print("RUNNING")
print("=" * 60)
records = study.run("summary.csv", progress_callback=True)

# 5. Inspect the results
summary = contrastpower.read_summary("summary.csv")
undiluted = summary[(summary["type"] == "undiluted") & (summary["dim"] == 4)]
print("\nPower at the 95% threshold (dimension 4, undiluted):")
print(undiluted.pivot_table(index="noise", columns=undiluted["genId"].str.split("-").str[0], values="power95"))

print("\n" + "=" * 60)
print("INTERPRETATION")
print("=" * 60)
print("• Structured generators start at power 1.0 with no noise")
print("• Power falls towards 0.05 as noise reaches 1.0")
print("• Independent stays near 0.05 everywhere (calibration check)")
print("• Diluted rows show how much power is lost when half the columns are noise")

# Optional: plot the curves (requires matplotlib)
# from contrastpower.utils.visualization import plot_power_curves
# plot_power_curves(summary, "c", 100, 4)
