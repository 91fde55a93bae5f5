from .item_plots import plot_item_accuracy, plot_accuracy_heatmap, plot_level_groups

__all__ = ['plot_item_accuracy', 'plot_accuracy_heatmap', 'plot_level_groups']
