import numpy as np
import matplotlib.pyplot as plt

from fluidbc import MaterialModelInputs, MaterialModelOutputs, setup


# Top boundary of a 2D box, density increasing with depth of the melt source
bc = setup(
    """inline:
    ["Boundary fluid pressure model"]
    "Plugin name" = "density"

    ["Boundary fluid pressure model".Density]
    "Density formulation" = "fluid density"
    """,
    dim=2,
)

x = np.linspace(0.0, 1.0, 200)
position = np.column_stack([x, np.ones_like(x)])
inputs = MaterialModelInputs.at_points(position)
outputs = MaterialModelOutputs(
    densities=np.full_like(x, 3300.0),
    fluid_densities=2700.0 + 300.0 * x,
)

result = bc.allocate_result(len(x))
bc.fluid_pressure_gradient(3, inputs, outputs, result)

plt.plot(x, result[:, 1])
plt.title("Fluid pressure gradient along the top boundary")
plt.xlabel("x")
plt.ylabel("dp/dy [Pa/m]")
plt.show()
