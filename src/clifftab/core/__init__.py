import clifftab.core.finite_field_solvers as finite_field_solvers
import clifftab.core.circuits as circuits
import clifftab.core.tableau as tableau
import clifftab.core.converters as converters
