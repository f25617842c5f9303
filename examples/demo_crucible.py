"""Demo script for the crucible.

Demonstrates the complete workflow: committing ore, heating it past its
melting point, balancing a selection to one liter, and pouring an ingot.
"""

from foundry_sim import create_crucible
from foundry_sim.crucible import get_cast


def main():
    """Run demonstration."""
    print("Crucible Demo")
    print("=" * 50)

    # 1. Create crucible
    print("\n[1] Creating crucible...")
    crucible = create_crucible()
    print(f"  Capacity: {crucible.capacity} L")
    print(f"  Materials: {', '.join(crucible.registry.list_materials())}")

    # 2. Commit ore
    print("\n[2] Committing ore...")
    for material_id, volume in [("iron", 0.8), ("copper", 0.5), ("gold", 0.1)]:
        portion = crucible.commit(material_id, volume)
        print(f"  {portion.material.name}: {volume:.2f} L at {portion.temperature:.0f} C")
    print(f"  Fill: {crucible.fill_volume:.2f} / {crucible.capacity:.2f} L")

    # 3. Heat
    print("\n[3] Heating to 800 C...")
    crucible.setpoint = 800.0
    dt = 0.02
    for _ in range(int(30.0 / dt)):
        for portion in crucible.tick(dt):
            print(f"  t={crucible.elapsed:6.2f} s  {portion.material.name} melted")

    melted = crucible.melted_composition()
    print("\n  Melted:")
    for material, liters in melted.items():
        print(f"    {material.name:<8} {liters:.3f} L")

    # 4. Balance
    print("\n[4] Balancing a 1 L selection...")
    ingot = get_cast("ingot")
    selection = crucible.balance_to_target({"iron": 0.5, "gold": 0.1}, target=ingot.volume)
    for material, liters in selection.items():
        print(f"  {material.name:<8} {liters:.3f} L")

    # 5. Pour
    print("\n[5] Pouring...")
    alloy = crucible.pour_cast(selection, ingot.cast_id)
    if alloy is None:
        print("  Pour rejected")
        return

    print(f"  {alloy.name} [{alloy.tier.label}] score {alloy.score:.1f}")
    for stat, value in alloy.rounded_stats().items():
        print(f"    {stat:<15} {value:3d}")
    print(f"  Left in crucible: {crucible.fill_volume:.3f} L")

    print("\n" + "=" * 50)
    print("Demo complete!")


if __name__ == "__main__":
    main()
