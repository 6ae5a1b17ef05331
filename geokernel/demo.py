from typing import Dict

from . import (
    Angle3Points,
    AngleElement,
    CircleByPoints,
    CircleElement,
    Circumcenter,
    Distance,
    Element,
    LabelElement,
    LineElement,
    LineFromPoints,
    Midpoint,
    PointElement,
    add_element,
    update_element,
)


def build_scene() -> Dict[str, Element]:
    """Right triangle ABC with its hypotenuse midpoint, circumcircle, angle and a length label."""

    scene: Dict[str, Element] = {}
    for pid, name, x, y in (("A", "A", 0.0, 0.0), ("B", "B", 200.0, 0.0), ("C", "C", 0.0, 150.0)):
        scene = add_element(scene, PointElement.build(pid, name=name, x=x, y=y))

    scene = add_element(scene, LineElement.build("AB", LineFromPoints("A", "B"), p1="A", p2="B"))
    scene = add_element(scene, LineElement.build("BC", LineFromPoints("B", "C"), p1="B", p2="C"))
    scene = add_element(scene, LineElement.build("CA", LineFromPoints("C", "A"), p1="C", p2="A"))
    scene = add_element(scene, PointElement.build("M", Midpoint("B", "C"), name="M"))
    scene = add_element(scene, PointElement.build("O", Circumcenter("A", "B", "C"), name="O"))
    scene = add_element(scene, CircleElement.build("circ", CircleByPoints("O", "A"), center="O", edge="A"))
    scene = add_element(scene, AngleElement.build("angA", Angle3Points("B", "A", "C"), p1="B", vertex="A", p2="C"))
    scene = add_element(scene, LabelElement.build("lenBC", Distance("B", "C")))
    return scene


def describe(scene: Dict[str, Element]) -> str:
    lines = []
    for element in scene.values():
        if isinstance(element, PointElement):
            lines.append(f"  {element.id}: ({element.x:.3f}, {element.y:.3f})")
        elif isinstance(element, CircleElement):
            lines.append(f"  {element.id}: radius={element.radius:.3f}")
        elif isinstance(element, AngleElement):
            lines.append(f"  {element.id}: {element.angle_value:.2f} deg right={element.is_right}")
        elif isinstance(element, LabelElement):
            lines.append(f"  {element.id}: {element.text!r} at ({element.x:.1f}, {element.y:.1f})")
    return "\n".join(lines)


def run():
    scene = build_scene()
    print(f"Initial scene:\n{describe(scene)}\n")

    scene = update_element(scene, "C", {"x": 40.0, "y": 160.0})
    print(f"After moving C:\n{describe(scene)}")


if __name__ == "__main__":
    run()
