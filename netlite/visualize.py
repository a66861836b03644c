"""
NetLite Visualization Utilities

Make networks and what they compute visible.
"""

import matplotlib.pyplot as plt
import networkx as nx

from .errors import InvalidArgument


def _finish(filename, what):
    """Save to filename if given, otherwise show the figure"""
    plt.tight_layout()

    if filename:
        plt.savefig(filename, dpi=150, bbox_inches='tight')
        print(f"Saved {what} to {filename}")
    else:
        plt.show()

    plt.close()


def _shape_label(shape):
    return f"{shape.frames}x{shape.rows}x{shape.cols}"


def plot_network_architecture(model, filename=None):
    """
    Draw the layer stack of a network as a chain of boxes.

    Each node shows the layer type and the shape it produces
    (frames x rows x cols).

    Args:
        model: Network or AutoEncoder (anything with a `layers` list)
        filename: If provided, save to this file
    """
    layers = list(model.layers)
    if not layers:
        raise InvalidArgument("cannot draw a network without layers")

    G = nx.DiGraph()
    G.add_node(0, label=f"Input\n{_shape_label(layers[0].input_shape)}", color='lightgray')
    for index, layer in enumerate(layers, start=1):
        color = 'lightblue' if layer.parameters() else 'lightyellow'
        G.add_node(index, label=f"{layer.layer_type}\n{_shape_label(layer.output_shape)}", color=color)
        G.add_edge(index - 1, index)

    plt.figure(figsize=(max(6, 2 * len(G)), 3))
    pos = {node: (node, 0) for node in G.nodes()}
    colors = [G.nodes[node]['color'] for node in G.nodes()]
    labels = {node: G.nodes[node]['label'] for node in G.nodes()}

    nx.draw(G, pos, labels=labels, node_color=colors, node_shape='s',
            node_size=3000, font_size=8, font_weight='bold',
            arrows=True, arrowsize=20, edge_color='gray')

    plt.title("Network Architecture\n(Blue = trainable, Yellow = fixed)",
              fontsize=12, fontweight='bold')
    plt.axis('off')

    _finish(filename, "network architecture")


def plot_tensor(tensor, title="Tensor", filename=None):
    """
    Show every frame of a tensor as a grayscale image.

    Handy for looking at convolution feature maps.

    Args:
        tensor: Tensor to draw
        title: Plot title
        filename: If provided, save to this file
    """
    fig, axes = plt.subplots(1, tensor.frames, figsize=(3 * tensor.frames, 3), squeeze=False)

    for frame, ax in enumerate(axes[0]):
        ax.imshow(tensor.data[frame], cmap='gray')
        ax.set_title(f"Frame {frame}", fontsize=10)
        ax.axis('off')

    fig.suptitle(title, fontsize=14, fontweight='bold')

    _finish(filename, "tensor plot")


def plot_training_history(losses, title="Training Loss", filename=None, log_scale=False):
    """
    Plot the loss over training epochs.

    Args:
        losses: List of loss values, one per epoch
        title: Plot title
        filename: If provided, save to this file
        log_scale: Use a logarithmic loss axis
    """
    if not losses:
        raise InvalidArgument("cannot plot an empty loss history")

    fig, ax = plt.subplots(figsize=(10, 6))

    ax.plot(range(1, len(losses) + 1), losses, linewidth=2, color='blue')
    ax.set_xlabel('Epoch', fontsize=12)
    ax.set_ylabel('Mean squared error', fontsize=12)
    if log_scale:
        ax.set_yscale('log')
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)

    # Add horizontal line at final loss
    ax.axhline(losses[-1], color='red', linestyle='--', alpha=0.5,
               label=f'Final: {losses[-1]:.4f}')
    ax.legend()

    _finish(filename, "training history")
