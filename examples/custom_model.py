import numpy as np

from fluidbc import (
    ConstantGravity, Interface, MaterialModelInputs, MaterialModelOutputs,
    SimulatorAccess, SimulatorContext, create_catalog, setup,
)
from fluidbc.params import Double


catalog = create_catalog()


@catalog.plugin("buoyant", "Density contrast to a reference density times gravity.")
class Buoyant(SimulatorAccess, Interface):
    def __init__(self):
        self.reference_density = 3300.0

    @classmethod
    def declare_parameters(cls, prm):
        with prm.subsection("Buoyant"):
            prm.declare_entry("Reference density", 3300.0, Double(0.0), "Units: kg/m^3.")

    def parse_parameters(self, prm):
        with prm.subsection("Buoyant"):
            self.reference_density = prm.get_double("Reference density")

    def fluid_pressure_gradient(self, boundary_id, inputs, outputs, result):
        g = self.get_gravity_model().gravity_vector(inputs.position)
        drho = outputs.densities - self.reference_density
        result[:] = drho[:, None] * g


bc = setup(
    {"Boundary fluid pressure model": {"Plugin name": "buoyant", "Buoyant": {"Reference density": 3000.0}}},
    dim=3,
    catalog=catalog,
    context=SimulatorContext(3, ConstantGravity([0.0, 0.0, -9.81])),
)

inputs = MaterialModelInputs.empty(3, 3)
outputs = MaterialModelOutputs(densities=[2900.0, 3000.0, 3100.0])
result = bc.allocate_result(3)
bc.fluid_pressure_gradient(0, inputs, outputs, result)
print(result)
